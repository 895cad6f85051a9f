"""Link and user storages in memory, in files and in PostgreSQL, plus session storage and errors."""