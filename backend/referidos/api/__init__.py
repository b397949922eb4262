"""
Endpoints de la API REST.
"""
