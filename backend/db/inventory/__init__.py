"""
Inventory persistence.

Models:
- InventoryItem (one row per registered item; photo holds a cache filename)
"""
