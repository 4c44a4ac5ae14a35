"""Shared request validators"""
