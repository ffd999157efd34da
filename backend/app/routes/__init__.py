"""HTTP routers, one module per audience (auth, admin, standard user)."""
