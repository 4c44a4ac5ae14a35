"""Domain modules (repository, service, schemas and router per domain)"""
