"""Editable static pricing, menu and location configuration."""

from __future__ import annotations

SIZE_PRICES: dict[str, str] = {
    "tall": "0",
    "grande": "0.50",
    "venti": "1.00",
}

MILK_PRICES: dict[str, str] = {
    "whole": "0",
    "skim": "0",
    "2percent": "0",
    "oat": "0.80",
    "almond": "0.80",
    "soy": "0.80",
    "coconut": "0.80",
    "oatmilk-foam": "1.00",
}

EXTRA_SHOT_PRICE = "0.90"

SYRUP_PRICES: dict[str, str] = {
    "vanilla": "0.60",
    "caramel": "0.60",
    "hazelnut": "0.60",
    "mocha": "0.60",
    "white-mocha": "0.60",
    "toffee-nut": "0.60",
    "peppermint": "0.60",
    "raspberry": "0.60",
    "cinnamon-dolce": "0.60",
    "brown-sugar": "0.70",
    "lavender": "0.70",
    "pistachio": "0.80",
}

TOPPING_PRICES: dict[str, str] = {
    "whipped-cream": "0",
    "caramel-drizzle": "0.60",
    "mocha-drizzle": "0.60",
    "cinnamon-powder": "0",
    "vanilla-powder": "0",
    "cold-foam": "1.25",
    "salted-cream-foam": "1.50",
    "chocolate-curls": "0.50",
    "cookie-crumbles": "0.75",
}

SWEETENER_PRICES: dict[str, str] = {
    "classic-syrup": "0",
    "liquid-cane-sugar": "0",
    "honey": "0.30",
    "stevia": "0",
    "splenda": "0",
    "raw-sugar": "0",
}

SIZE_LABELS: dict[str, str] = {
    "tall": "Tall",
    "grande": "Grande",
    "venti": "Venti",
}

# Whole and 2% are the house milks and never appear in a drink name.
DEFAULT_MILKS: tuple[str, ...] = ("2percent", "whole")

MILK_NAME_LABELS: dict[str, str] = {
    "oat": "Oatmilk",
    "almond": "Almondmilk",
    "soy": "Soy",
    "coconut": "Coconut",
    "skim": "Nonfat",
    "oatmilk-foam": "Oatmilk Foam",
}

TIP_PERCENT_PRESETS: tuple[int, ...] = (0, 10, 15, 20, 25)

MENU_ITEMS_RAW: list[dict[str, object]] = [
    {
        "id": "caffe-latte",
        "name": "Latte",
        "description": "Rich espresso balanced with steamed milk and a light layer of foam.",
        "category": "espresso",
        "base_price": "3.25",
        "calories": {"tall": 150, "grande": 190, "venti": 250},
        "caffeine": {"tall": 75, "grande": 150, "venti": 150},
        "temperatures": ["hot", "iced"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {"size": "grande", "temperature": "hot", "milk": "2percent", "espresso_roast": "signature"},
        "tags": ["classic"],
    },
    {
        "id": "caramel-macchiato",
        "name": "Caramel Macchiato",
        "description": "Vanilla-sweetened milk marked with espresso and a caramel drizzle.",
        "category": "espresso",
        "base_price": "4.45",
        "calories": {"tall": 190, "grande": 250, "venti": 320},
        "caffeine": {"tall": 75, "grande": 150, "venti": 225},
        "temperatures": ["hot", "iced"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {
            "size": "grande",
            "temperature": "hot",
            "milk": "2percent",
            "espresso_roast": "signature",
            "syrups": [{"flavor": "vanilla", "pumps": 3}],
            "toppings": [{"topping": "caramel-drizzle", "amount": "regular"}],
        },
        "tags": ["favorite"],
    },
    {
        "id": "cappuccino",
        "name": "Cappuccino",
        "description": "Dark espresso under a deep layer of airy milk foam.",
        "category": "espresso",
        "base_price": "3.45",
        "calories": {"tall": 100, "grande": 140, "venti": 180},
        "caffeine": {"tall": 75, "grande": 150, "venti": 150},
        "temperatures": ["hot"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {"size": "grande", "temperature": "hot", "milk": "2percent", "espresso_roast": "signature"},
    },
    {
        "id": "americano",
        "name": "Caffe Americano",
        "description": "Espresso shots topped with hot water.",
        "category": "espresso",
        "base_price": "2.95",
        "calories": {"tall": 10, "grande": 15, "venti": 20},
        "caffeine": {"tall": 150, "grande": 225, "venti": 300},
        "temperatures": ["hot", "iced"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {"size": "grande", "temperature": "hot", "espresso_roast": "signature"},
    },
    {
        "id": "cold-brew",
        "name": "Cold Brew",
        "description": "Slow-steeped for twenty hours for a smooth, chocolatey cup.",
        "category": "cold-brew",
        "base_price": "3.25",
        "calories": {"tall": 5, "grande": 5, "venti": 5},
        "caffeine": {"tall": 155, "grande": 205, "venti": 310},
        "temperatures": ["iced"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {"size": "grande", "temperature": "iced", "ice_level": "regular"},
        "tags": ["favorite"],
    },
    {
        "id": "salted-caramel-cold-brew",
        "name": "Salted Caramel Cream Cold Brew",
        "description": "Cold brew sweetened with vanilla and topped with salted caramel cream foam.",
        "category": "cold-brew",
        "base_price": "4.75",
        "calories": {"tall": 160, "grande": 240, "venti": 330},
        "caffeine": {"tall": 140, "grande": 185, "venti": 275},
        "temperatures": ["iced"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {
            "size": "grande",
            "temperature": "iced",
            "syrups": [{"flavor": "vanilla", "pumps": 2}],
            "toppings": [{"topping": "salted-cream-foam", "amount": "regular"}],
            "ice_level": "regular",
        },
        "is_new": True,
    },
    {
        "id": "mocha-frappuccino",
        "name": "Mocha Frappuccino",
        "description": "Coffee and mocha sauce blended with milk and ice, finished with whipped cream.",
        "category": "frappuccino",
        "base_price": "4.95",
        "calories": {"tall": 290, "grande": 370, "venti": 470},
        "caffeine": {"tall": 70, "grande": 100, "venti": 130},
        "temperatures": ["blended"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {
            "size": "grande",
            "temperature": "blended",
            "milk": "whole",
            "syrups": [{"flavor": "mocha", "pumps": 3}],
            "toppings": [{"topping": "whipped-cream", "amount": "regular"}],
        },
    },
    {
        "id": "chai-latte",
        "name": "Chai",
        "description": "Black tea infused with cinnamon, clove and warming spices.",
        "category": "tea",
        "base_price": "3.75",
        "calories": {"tall": 190, "grande": 240, "venti": 310},
        "caffeine": {"tall": 70, "grande": 95, "venti": 120},
        "temperatures": ["hot", "iced"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {"size": "grande", "temperature": "hot", "milk": "2percent"},
    },
    {
        "id": "matcha-latte",
        "name": "Matcha Latte",
        "description": "Smooth matcha green tea with steamed milk.",
        "category": "tea",
        "base_price": "4.25",
        "calories": {"tall": 190, "grande": 240, "venti": 320},
        "caffeine": {"tall": 55, "grande": 80, "venti": 110},
        "temperatures": ["hot", "iced"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {"size": "grande", "temperature": "hot", "milk": "2percent"},
    },
    {
        "id": "pink-drink",
        "name": "Pink Drink",
        "description": "Strawberry acai refresher shaken with coconut milk.",
        "category": "refreshers",
        "base_price": "4.45",
        "calories": {"tall": 110, "grande": 140, "venti": 200},
        "caffeine": {"tall": 30, "grande": 45, "venti": 70},
        "temperatures": ["iced"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {"size": "grande", "temperature": "iced", "milk": "coconut", "ice_level": "regular"},
        "tags": ["favorite"],
    },
    {
        "id": "hot-chocolate",
        "name": "Hot Chocolate",
        "description": "Steamed milk and mocha sauce topped with whipped cream.",
        "category": "hot-chocolate",
        "base_price": "3.45",
        "calories": {"tall": 320, "grande": 400, "venti": 520},
        "caffeine": {"tall": 20, "grande": 25, "venti": 30},
        "temperatures": ["hot"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {
            "size": "grande",
            "temperature": "hot",
            "milk": "2percent",
            "toppings": [{"topping": "whipped-cream", "amount": "regular"}],
        },
    },
    {
        "id": "pumpkin-spice-latte",
        "name": "Pumpkin Spice Latte",
        "description": "Espresso, steamed milk and pumpkin spice, finished with whipped cream.",
        "category": "seasonal",
        "base_price": "5.25",
        "calories": {"tall": 300, "grande": 390, "venti": 470},
        "caffeine": {"tall": 75, "grande": 150, "venti": 150},
        "temperatures": ["hot", "iced"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {
            "size": "grande",
            "temperature": "hot",
            "milk": "2percent",
            "espresso_roast": "signature",
            "toppings": [{"topping": "whipped-cream", "amount": "regular"}],
        },
        "is_seasonal": True,
    },
    {
        "id": "lavender-oat-latte",
        "name": "Lavender Oatmilk Latte",
        "description": "Blonde espresso with lavender and creamy oat milk.",
        "category": "seasonal",
        "base_price": "5.45",
        "calories": {"tall": 200, "grande": 260, "venti": 340},
        "caffeine": {"tall": 85, "grande": 170, "venti": 255},
        "temperatures": ["hot", "iced"],
        "sizes": ["tall", "grande", "venti"],
        "defaults": {
            "size": "grande",
            "temperature": "iced",
            "milk": "oat",
            "espresso_roast": "blonde",
            "syrups": [{"flavor": "lavender", "pumps": 3}],
        },
        "is_new": True,
        "is_seasonal": True,
    },
    {
        "id": "butter-croissant",
        "name": "Butter Croissant",
        "description": "Flaky, buttery layers baked fresh each morning.",
        "category": "pastries",
        "base_price": "3.25",
        "calories": {"grande": 260},
        "temperatures": ["hot"],
        "sizes": ["grande"],
        "defaults": {},
        "is_food": True,
    },
    {
        "id": "blueberry-muffin",
        "name": "Blueberry Muffin",
        "description": "Moist muffin packed with blueberries and a sugar crumble.",
        "category": "pastries",
        "base_price": "2.95",
        "calories": {"grande": 360},
        "temperatures": ["hot"],
        "sizes": ["grande"],
        "defaults": {},
        "is_food": True,
    },
    {
        "id": "turkey-pesto-panini",
        "name": "Turkey Pesto Panini",
        "description": "Roasted turkey, provolone and basil pesto on toasted focaccia.",
        "category": "sandwiches",
        "base_price": "7.45",
        "calories": {"grande": 520},
        "temperatures": ["hot"],
        "sizes": ["grande"],
        "defaults": {},
        "is_food": True,
    },
]

LOCATIONS_RAW: list[dict[str, object]] = [
    {
        "id": "downtown-main",
        "name": "Moonbeam Cafe - Oakmont",
        "address": "636 Allegheny River Blvd, Oakmont, PA 15139",
        "distance": "0.3 mi",
        "estimated_wait": 8,
        "is_open": True,
        "hours": "8:00 AM - 3:00 PM",
    },
    {
        "id": "riverside",
        "name": "Moonbeam Cafe - Riverside",
        "address": "101 Riverfront Dr, Oakmont, PA 15139",
        "distance": "1.2 mi",
        "estimated_wait": 12,
        "is_open": True,
        "hours": "7:00 AM - 2:00 PM",
    },
    {
        "id": "verona",
        "name": "Moonbeam Cafe - Verona",
        "address": "512 Allegheny Ave, Verona, PA 15147",
        "distance": "2.6 mi",
        "estimated_wait": 10,
        "is_open": False,
        "hours": "Closed for renovation",
    },
]
