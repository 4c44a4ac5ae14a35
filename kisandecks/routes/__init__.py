"""Thin routers that proxy external services"""
