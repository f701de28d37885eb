from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, OrderItemInputDTO
from modules.orders.exceptions import InsufficientStock
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.dtos import CreateProductDTO
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

SEED_PRODUCTS = [
    ("Mechanical Keyboard", "Hot-swappable, 87 keys", "89.90", 40),
    ("Wireless Mouse", "2.4 GHz, 6 buttons", "29.90", 60),
    ('27" Monitor', "IPS, 144 Hz", "249.00", 15),
    ("USB-C Hub", "7-in-1", "39.50", 30),
    ("Laptop Stand", "Aluminium, adjustable", "45.00", 25),
    ("Webcam", "1080p, dual microphones", "59.99", 10),
]

SEED_CUSTOMERS = [
    ("Ana Souza", "ana@example.com", "Rua das Flores 10, Curitiba"),
    ("Bruno Lima", "bruno@example.com", "Av. Paulista 1000, Sao Paulo"),
    ("Carla Mendes", "carla@example.com", "Rua XV 200, Porto Alegre"),
    ("Daniel Costa", "daniel@example.com", "Rua do Sol 5, Recife"),
]


class Command(BaseCommand):
    help = "Seed database with development products and orders."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=8)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        products = self._seed_products()
        orders_created = self._seed_orders(products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={len(products)}, orders={orders_created}"
            )
        )

    def _seed_products(self) -> list[Product]:
        service = ProductService(repository=ProductDjangoRepository())
        products: list[Product] = []
        for name, description, price, stock in SEED_PRODUCTS:
            existing = Product.objects.filter(name=name).first()
            if existing:
                products.append(existing)
                continue
            products.append(
                service.create_product(
                    CreateProductDTO(
                        name=name,
                        description=description,
                        price=Decimal(price),
                        stock_quantity=stock,
                    )
                )
            )
        return products

    def _seed_orders(self, products: list[Product], count: int) -> int:
        # Orders go through the service so seeded stock stays reconciled.
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        created = 0
        for _ in range(count):
            name, email, address = random.choice(SEED_CUSTOMERS)
            picked = random.sample(products, k=random.randint(1, 3))
            dto = CreateOrderDTO(
                customer_name=name,
                customer_email=email,
                shipping_address=address,
                status=random.choice(list(OrderStatus)),
                items=[
                    OrderItemInputDTO(product_id=p.id, quantity=random.randint(1, 3))
                    for p in picked
                ],
            )
            try:
                service.create_order(dto)
            except InsufficientStock as exc:
                self.stdout.write(self.style.WARNING(f"Skipped order: {exc}"))
                continue
            created += 1
        return created
