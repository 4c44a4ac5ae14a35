"""KisanDecks API - farmer services backend"""
