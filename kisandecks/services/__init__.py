"""Clients for SMS, LLM and market data providers"""
