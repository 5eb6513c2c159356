"""HTTP applications for the shop, orders and items services."""
