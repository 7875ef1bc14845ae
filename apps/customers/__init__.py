"""
Customers App - Orders and Category Loyalty Rewards

Customers are identified by phone number. Every paid drink is recorded as an
order and counted towards the customer's reward counter for that drink
category: every fifth paid drink in a category unlocks one free drink in the
same category, which staff redeem through a claim.
"""
