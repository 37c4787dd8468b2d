"""Static lookup data that the live feed does not provide.

``HARDCODED_MENUS`` holds fixed menus keyed by eatery slug, for eateries whose
feed entry never carries a menu. ``EXTERNAL_EATERIES`` lists eateries that are
missing from the feed altogether; their hours use weekday spans instead of
calendar dates.
"""

from typing import Any

HARDCODED_MENUS: dict[str, list[dict[str, Any]]] = {
    "Bear-Necessities": [
        {
            "category": "Grill",
            "items": [
                {"item": "Cheeseburger", "healthy": False},
                {"item": "Grilled Chicken Sandwich", "healthy": True},
                {"item": "French Fries", "healthy": False},
            ],
        },
        {
            "category": "Snacks",
            "items": [
                {"item": "Fresh Fruit Cup", "healthy": True},
                {"item": "Assorted Chips", "healthy": False},
            ],
        },
    ],
    "Jansens-Market": [
        {
            "category": "Grab and Go",
            "items": [
                {"item": "Turkey Wrap", "healthy": True},
                {"item": "Garden Salad", "healthy": True},
                {"item": "Sushi", "healthy": True},
            ],
        },
        {
            "category": "Beverages",
            "items": [
                {"item": "Coffee", "healthy": False},
                {"item": "Bottled Water", "healthy": True},
            ],
        },
    ],
    "Martha's-Cafe": [
        {
            "category": "Hot Traditional Station - Sides",
            "items": [
                {"item": "Steamed Vegetables", "healthy": True},
                {"item": "Rice Pilaf", "healthy": False},
            ],
        },
        {
            "category": "Hot Traditional Station - Entrees",
            "items": [
                {"item": "Roast Chicken", "healthy": True},
                {"item": "Vegetable Lasagna", "healthy": False},
            ],
        },
        {
            "category": "Desserts",
            "items": [{"item": "Chocolate Chip Cookie", "healthy": False}],
        },
    ],
}

EXTERNAL_EATERIES: list[dict[str, Any]] = [
    {
        "id": 100,
        "slug": "Terrace",
        "name": "Terrace Restaurant",
        "nameshort": "Terrace",
        "aboutshort": "Salads, sandwiches and daily specials in the Statler Hotel.",
        "contactPhone": "607-254-2504",
        "campusArea": {"descr": "Central Campus", "descrshort": "Central"},
        "eateryTypes": [{"descr": "Cafe", "descrshort": "Cafe"}],
        "location": "Statler Hall",
        "latitude": 42.445555,
        "longitude": -76.481961,
        "payMethods": [
            {"descr": "Cash", "descrshort": "Cash"},
            {"descr": "Major Credit Cards", "descrshort": "Major Credit Cards"},
            {"descr": "Cornell Card", "descrshort": "Cornell Card"},
        ],
        "operatingHours": [
            {
                "weekday": "monday-friday",
                "events": [{"descr": "Lunch", "start": "10:00am", "end": "2:30pm"}],
            },
        ],
        "diningItems": [
            {"item": "Soup of the Day", "category": "General", "healthy": True},
            {"item": "Build Your Own Salad", "category": "General", "healthy": True},
        ],
    },
    {
        "id": 101,
        "slug": "Macs-Cafe",
        "name": "Mac's Café",
        "nameshort": "Mac's",
        "aboutshort": "Coffee, pastries and grab-and-go meals.",
        "contactPhone": "607-255-5555",
        "campusArea": {"descr": "Central Campus", "descrshort": "Central"},
        "eateryTypes": [{"descr": "Coffee Shop", "descrshort": "Coffee Shop"}],
        "location": "Statler Hall",
        "latitude": 42.445784,
        "longitude": -76.482193,
        "payMethods": [
            {"descr": "Meal Plan - Debit", "descrshort": "Meal Plan - Debit"},
            {"descr": "Cash", "descrshort": "Cash"},
        ],
        "operatingHours": [
            {
                "weekday": "monday-thursday",
                "events": [{"descr": "General", "start": "7:30am", "end": "10:00pm"}],
            },
            {
                "weekday": "friday",
                "events": [{"descr": "General", "start": "7:30am", "end": "4:00pm"}],
            },
            {
                "weekday": "saturday-sunday",
                "events": [{"descr": "General", "start": "11:00am", "end": "1:00am"}],
            },
        ],
        "diningItems": [],
    },
]
