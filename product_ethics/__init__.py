"""
Product ethics service: data model and domain services for crowdsourced
product and company information, info channels and trust scoring.
"""
