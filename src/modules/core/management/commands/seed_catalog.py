from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository


class Command(BaseCommand):
    help = "Seed database with a development catalog and, optionally, orders."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders",
            type=int,
            default=0,
            help="Number of orders to place against the seeded catalog.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        products = self._seed_products()
        orders_created = self._seed_orders(products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        catalog = [
            ("ELET-001", "Monitor 27\"", "Electronics", Decimal("1299.90")),
            ("ELET-002", "Mechanical Keyboard", "Electronics", Decimal("399.90")),
            ("ELET-003", "Gaming Mouse", "Electronics", Decimal("249.90")),
            ("ELET-004", "Notebook 14\"", "Electronics", Decimal("3999.00")),
            ("ELET-005", "Headset", "Electronics", Decimal("299.90")),
            ("FURN-001", "Office Desk", "Furniture", Decimal("899.00")),
            ("FURN-002", "Ergonomic Chair", "Furniture", Decimal("1499.00")),
            ("FURN-003", "Bookshelf", "Furniture", Decimal("699.00")),
            ("OFF-001", "A4 Paper", "Office", Decimal("29.90")),
            ("OFF-002", "Blue Pen", "Office", Decimal("4.995")),
            ("OFF-003", "Notebook", "Office", Decimal("19.90")),
            ("OFF-004", "Stapler", "Office", Decimal("39.90")),
            ("OFF-005", "Sticky Notes", "Office", Decimal("12.90")),
            ("OFF-006", "Calculator", "Office", Decimal("89.90")),
        ]
        for sku, name, category, price in catalog:
            product, _ = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "description": category,
                    "price": price,
                    "quantity": random.randint(10, 200),
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, products: list[Product], count: int) -> int:
        if count <= 0:
            return 0
        if not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no products)."))
            return 0

        self.stdout.write("Creating orders...")
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        orders_created = 0
        for _ in range(count):
            sample = random.sample(products, k=min(random.randint(1, 4), len(products)))
            items = [
                {"product_id": product.pk, "quantity": random.randint(1, 3)}
                for product in sample
            ]
            result = service.create_order(random.randint(1, 10), items)
            if result.ok:
                orders_created += 1
            else:
                self.stdout.write(
                    self.style.WARNING(f"Order skipped: {result.error.message}")
                )

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
