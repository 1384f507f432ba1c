"""FoodTech workflow API."""
