"""
Configuration package for geosite
"""
