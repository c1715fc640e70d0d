"""HTTP interface routers."""
