"""
Menu App - Drink Catalog

This app owns the shop's menu: items grouped by drink category, their
prices and images, availability toggling and best-seller listing.
"""
