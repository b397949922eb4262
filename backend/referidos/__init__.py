"""
Sistema de Referidos entre Clínicas.
"""
