from decimal import Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import Role
from apps.catalog.models import Category, Product

SAMPLE_PRODUCTS = [
    {
        "name": "Golden Hoop Earrings",
        "description": "Beautiful golden hoop earrings perfect for daily wear. Lightweight and comfortable.",
        "price": Decimal("899"),
        "discount": Decimal("10"),
        "category": Category.EARRINGS,
        "stock": 50,
        "images": ["https://images.unsplash.com/photo-1535632066927-ab7c9ab60908?w=500"],
        "material": "Gold Plated Brass",
        "featured": True,
    },
    {
        "name": "Pearl Drop Earrings",
        "description": "Elegant pearl drop earrings that add sophistication to any outfit.",
        "price": Decimal("1299"),
        "discount": Decimal("15"),
        "category": Category.EARRINGS,
        "stock": 30,
        "images": ["https://images.unsplash.com/photo-1535556116002-6281ff3e9f36?w=500"],
        "material": "Sterling Silver with Pearls",
        "featured": True,
    },
    {
        "name": "Delicate Chain Necklace",
        "description": "Minimalist gold chain necklace, perfect for layering or wearing alone.",
        "price": Decimal("1599"),
        "discount": Decimal("0"),
        "category": Category.NECKLACES,
        "stock": 40,
        "images": ["https://images.unsplash.com/photo-1599643478518-a784e5dc4c8f?w=500"],
        "material": "Gold Plated",
        "featured": True,
    },
    {
        "name": "Statement Pendant Necklace",
        "description": "Bold and beautiful pendant necklace for special occasions.",
        "price": Decimal("2499"),
        "discount": Decimal("20"),
        "category": Category.NECKLACES,
        "stock": 25,
        "images": ["https://images.unsplash.com/photo-1611591437281-460bfbe1220a?w=500"],
        "material": "Rose Gold Plated",
        "featured": True,
    },
    {
        "name": "Diamond-Cut Ring",
        "description": "Sparkling diamond-cut ring that catches the light beautifully.",
        "price": Decimal("1799"),
        "discount": Decimal("10"),
        "category": Category.RINGS,
        "stock": 35,
        "images": ["https://images.unsplash.com/photo-1605100804763-247f67b3557e?w=500"],
        "material": "Sterling Silver",
        "featured": True,
    },
    {
        "name": "Stackable Rings Set",
        "description": "Set of 3 delicate stackable rings that can be worn together or separately.",
        "price": Decimal("1999"),
        "discount": Decimal("15"),
        "category": Category.RINGS,
        "stock": 45,
        "images": ["https://images.unsplash.com/photo-1603561591411-07134e71a2a9?w=500"],
        "material": "Mixed Metals",
        "featured": False,
    },
    {
        "name": "Traditional Bangles Set",
        "description": "Set of 4 traditional bangles with intricate patterns.",
        "price": Decimal("2999"),
        "discount": Decimal("10"),
        "category": Category.BANGLES,
        "stock": 20,
        "images": ["https://images.unsplash.com/photo-1611591437281-460bfbe1220a?w=500"],
        "material": "Gold Plated Brass",
        "featured": True,
    },
    {
        "name": "Complete Jewelry Set",
        "description": "Complete set including necklace, earrings, and bracelet.",
        "price": Decimal("4999"),
        "discount": Decimal("25"),
        "category": Category.SETS,
        "stock": 15,
        "images": ["https://images.unsplash.com/photo-1599643478518-a784e5dc4c8f?w=500"],
        "material": "Rose Gold Plated",
        "featured": True,
    },
]


class Command(BaseCommand):
    help = "Seeds a demo admin, a demo customer and the sample jewellery catalogue."

    def add_arguments(self, parser):
        parser.add_argument("--admin-email", default="admin@chulbulijewels.com")
        parser.add_argument("--admin-password", default="Admin@123")
        parser.add_argument("--customer-email", default="customer@example.com")
        parser.add_argument("--customer-password", default="Customer@123")

    @transaction.atomic
    def handle(self, *args, **options):
        if settings.PRODUCTION:
            self.stderr.write(self.style.ERROR("Production Lock: demo data is never seeded in production."))
            return

        self.stdout.write("🌱 Seeding store data...")

        User = get_user_model()

        admin, created = User.objects.get_or_create(
            email=options["admin_email"].lower(),
            defaults={"name": "Admin", "role": Role.ADMIN, "is_staff": True},
        )
        if created:
            admin.set_password(options["admin_password"])
            admin.save(update_fields=["password"])
        self.stdout.write(f"   Admin: {admin.email} ({'created' if created else 'exists'})")

        customer, created = User.objects.get_or_create(
            email=options["customer_email"].lower(),
            defaults={"name": "Jane Doe", "role": Role.CUSTOMER},
        )
        if created:
            customer.set_password(options["customer_password"])
            customer.save(update_fields=["password"])
        self.stdout.write(f"   Customer: {customer.email} ({'created' if created else 'exists'})")

        # Names are the natural key here so re-running never duplicates products
        created_count = 0
        for data in SAMPLE_PRODUCTS:
            _, created = Product.objects.get_or_create(
                name=data["name"],
                defaults={k: v for k, v in data.items() if k != "name"},
            )
            created_count += int(created)

        self.stdout.write(self.style.SUCCESS(
            f"✅ Seeding complete: {created_count} new product(s), {Product.objects.count()} total."
        ))
