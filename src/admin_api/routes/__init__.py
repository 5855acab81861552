from src.admin_api.routes import addresses, auth, catalog, health, users

routers = [health.router, auth.router, users.router, addresses.router, *catalog.routers]
