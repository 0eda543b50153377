"""Estado compartido del mundo: almacén de registros de jugador sobre una tabla persistente."""
