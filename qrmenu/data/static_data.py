"""
Bundled demo dataset.

Served whenever the tenant document is judged empty (no real data entered
yet). It is never written to and never handed out by reference: use
get_static_data() to obtain a private copy.
"""

from qrmenu.schemas import RestaurantData

# Minimum number of live categories that marks the store as configured
MIN_CATEGORIES_THRESHOLD = 1

# Tenant document markers
USING_STATIC_DATA_FLAG = "usingStaticData"
LAST_UPDATED_FIELD = "lastUpdated"
LAST_STATIC_USAGE_FIELD = "lastStaticDataUsage"


_STATIC_RESTAURANT_DATA = RestaurantData.model_validate({
    "info": {
        "name": "QR Menü Demo Restoran",
        "logo": "https://images.unsplash.com/photo-1559925393-8be0ec4767c8?w=200&h=200&fit=crop&crop=center",
        "backgroundImage": (
            "https://images.unsplash.com/photo-1517248135467-4c7edcad34c4"
            "?ixlib=rb-4.0.3&auto=format&fit=crop&w=2070&q=80"
        ),
        "wifi": {
            "name": "Demo_WiFi",
            "password": "demo123",
        },
        "footer": {
            "welcomeText": "Bu demo menüdür. Admin panelinden kendi verilerinizi ekleyebilirsiniz.",
            "priceNote": "Fiyatlar demo amaçlıdır",
            "copyright": "© 2024 QR Menü Demo • Admin panelinden düzenleyebilirsiniz",
        },
    },
    "categories": [
        {
            "id": "demo-sicak-icecekler",
            "name": "Sıcak İçecekler",
            "description": "Demo sıcak içecek kategorisi",
            "order": 1,
            "items": [
                {
                    "id": "demo-kahve",
                    "name": "Kahve",
                    "description": "Demo kahve ürünü - Admin panelinden düzenleyebilirsiniz",
                    "price": 25,
                    "image": "https://images.unsplash.com/photo-1509042239860-f550ce710b93?w=400&h=300&fit=crop&crop=center",
                    "available": True,
                    "preparationTime": "3-5 dk",
                    "rating": 4.5,
                    "reviewCount": 50,
                },
                {
                    "id": "demo-cay",
                    "name": "Çay",
                    "description": "Demo çay ürünü - Admin panelinden düzenleyebilirsiniz",
                    "price": 15,
                    "image": "https://images.unsplash.com/photo-1594631661960-4baa99394ac4?w=400&h=300&fit=crop&crop=center",
                    "available": True,
                    "preparationTime": "2-3 dk",
                    "rating": 4.0,
                    "reviewCount": 25,
                },
            ],
        },
        {
            "id": "demo-soguk-icecekler",
            "name": "Soğuk İçecekler",
            "description": "Demo soğuk içecek kategorisi",
            "order": 2,
            "items": [
                {
                    "id": "demo-su",
                    "name": "Su",
                    "description": "Demo su ürünü - Admin panelinden düzenleyebilirsiniz",
                    "price": 5,
                    "image": "https://images.unsplash.com/photo-1550672652-85cbb7d3b9c0?w=400&h=300&fit=crop&crop=center",
                    "available": True,
                    "preparationTime": "Hemen",
                    "rating": 5.0,
                    "reviewCount": 10,
                },
                {
                    "id": "demo-meyve-suyu",
                    "name": "Meyve Suyu",
                    "description": "Demo meyve suyu ürünü - Admin panelinden düzenleyebilirsiniz",
                    "price": 20,
                    "image": "https://images.unsplash.com/photo-1613478223719-2ab802602423?w=400&h=300&fit=crop&crop=center",
                    "available": True,
                    "preparationTime": "1-2 dk",
                    "rating": 4.2,
                    "reviewCount": 15,
                },
            ],
        },
        {
            "id": "demo-atistirmaliklar",
            "name": "Atıştırmalıklar",
            "description": "Demo atıştırmalık kategorisi",
            "order": 3,
            "items": [
                {
                    "id": "demo-kurabiye",
                    "name": "Kurabiye",
                    "description": "Demo kurabiye ürünü - Admin panelinden düzenleyebilirsiniz",
                    "price": 12,
                    "image": "https://images.unsplash.com/photo-1499636136210-6f4ee915583e?w=400&h=300&fit=crop&crop=center",
                    "available": True,
                    "preparationTime": "Hemen",
                    "rating": 4.3,
                    "reviewCount": 20,
                },
            ],
        },
    ],
    "adminPassword": "admin123",
})


def get_static_data() -> RestaurantData:
    """Return a deep copy of the demo dataset."""
    return _STATIC_RESTAURANT_DATA.model_copy(deep=True)


def static_restaurant_name() -> str:
    """Name of the demo restaurant, used to tell real info from demo info."""
    return _STATIC_RESTAURANT_DATA.info.name
