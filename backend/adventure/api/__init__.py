"""HTTP API routers"""
