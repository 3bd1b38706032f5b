"""Built-in recipes served when the meal generation provider is unavailable.

One sample per meal type, plus image URLs attached to generated recipes.
"""

MEAL_IMAGES = {
    "breakfast": [
        "https://images.unsplash.com/photo-1623428187969-5da2dcea5ebf",
        "https://images.unsplash.com/photo-1525351484163-7529414344d8",
        "https://images.unsplash.com/photo-1533089860892-a7c6f0a88666",
    ],
    "lunch": [
        "https://images.unsplash.com/photo-1490645935967-10de6ba17061",
        "https://images.unsplash.com/photo-1546069901-ba9599a7e63c",
        "https://images.unsplash.com/photo-1512621776951-a57141f2eefd",
    ],
    "dinner": [
        "https://images.unsplash.com/photo-1539136788836-5699e78bfc75",
        "https://images.unsplash.com/photo-1467003909585-2f8a72700288",
        "https://images.unsplash.com/photo-1559847844-5315695dadae",
    ],
    "snack": [
        "https://images.unsplash.com/photo-1486328228599-85db4443971f",
        "https://images.unsplash.com/photo-1624300629298-e9de39c13be6",
        "https://images.unsplash.com/photo-1593115590229-5c97a4c87b5d",
    ],
}

SAMPLE_MEALS = {
    "breakfast": {
        "name": "Greek Yogurt Breakfast Bowl",
        "description": "High protein breakfast with berries, nuts, and a touch of honey.",
        "meal_type": "breakfast",
        "carbs": 18,
        "servings": 1,
        "prep_time": 10,
        "tags": ["Breakfast", "High Protein"],
        "ingredients": ["Greek yogurt", "Mixed berries", "Almonds", "Honey", "Cinnamon"],
        "instructions": [
            "Add yogurt to a bowl",
            "Top with berries, nuts and a drizzle of honey",
            "Sprinkle with cinnamon",
        ],
        "image_url": MEAL_IMAGES["breakfast"][0],
    },
    "lunch": {
        "name": "Quinoa Bowl with Chickpeas",
        "description": "Plant-based protein with complex carbs for sustained energy.",
        "meal_type": "lunch",
        "carbs": 32,
        "servings": 1,
        "prep_time": 20,
        "tags": ["Lunch", "Vegetarian"],
        "ingredients": [
            "Quinoa", "Chickpeas", "Bell peppers", "Cucumber", "Olive oil",
            "Lemon juice", "Salt", "Pepper", "Parsley",
        ],
        "instructions": [
            "Cook quinoa according to package instructions",
            "Chop vegetables and mix with chickpeas",
            "Combine all ingredients and dress with olive oil and lemon juice",
            "Season with salt, pepper, and chopped parsley",
        ],
        "image_url": MEAL_IMAGES["lunch"][0],
    },
    "dinner": {
        "name": "Grilled Salmon with Vegetables",
        "description": "Perfect for dinner - high protein, low carb option with omega-3 fatty acids.",
        "meal_type": "dinner",
        "carbs": 12,
        "servings": 1,
        "prep_time": 30,
        "tags": ["Low Carb", "High Protein"],
        "ingredients": ["Salmon fillet", "Asparagus", "Bell peppers", "Olive oil", "Lemon", "Salt", "Pepper"],
        "instructions": [
            "Preheat oven to 400°F",
            "Season salmon with salt, pepper and lemon",
            "Roast vegetables with olive oil",
            "Bake for 15-20 minutes",
        ],
        "image_url": MEAL_IMAGES["dinner"][0],
    },
    "snack": {
        "name": "Veggie Sticks with Hummus",
        "description": "A balanced snack with protein and fiber to keep blood sugar stable.",
        "meal_type": "snack",
        "carbs": 15,
        "servings": 1,
        "prep_time": 5,
        "tags": ["Low Carb", "Vegetarian"],
        "ingredients": ["Carrot sticks", "Cucumber sticks", "Bell pepper strips", "Hummus", "Sesame seeds"],
        "instructions": [
            "Wash and cut vegetables into sticks",
            "Serve with a side of hummus",
            "Sprinkle hummus with sesame seeds",
        ],
        "image_url": MEAL_IMAGES["snack"][0],
    },
}
