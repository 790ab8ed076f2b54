import random
import uuid
from decimal import Decimal

import factory
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

from marketplace.models import Category, Product

User = get_user_model()


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    username = factory.Sequence(lambda n: f"user_{n}")
    email = factory.Sequence(lambda n: f"user_{n}@example.com")
    password = factory.PostGenerationMethodCall("set_password", "defaultpassword")
    is_active = True


class EditorFactory(UserFactory):
    """User in one of the catalog editor groups"""

    username = factory.Sequence(lambda n: f"employee_{n}")
    email = factory.Sequence(lambda n: f"employee_{n}@example.com")

    @factory.post_generation
    def roles(self, create, extracted, **kwargs):
        if not create:
            return
        for name in extracted or ["employee"]:
            group, _ = Group.objects.get_or_create(name=name)
            self.groups.add(group)


class AdminFactory(UserFactory):
    is_superuser = True
    is_staff = True
    username = factory.Sequence(lambda n: f"admin_{n}")
    email = factory.Sequence(lambda n: f"admin_{n}@example.com")


class CategoryFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Category
        django_get_or_create = ("name",)

    name = factory.Sequence(lambda n: f"Category {n}")


def image_name(extension="png"):
    return f"{uuid.uuid4().hex}.{extension}"


class ProductFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Product
        skip_postgeneration_save = True

    title = factory.Sequence(lambda n: f"Product {n}")
    description = factory.Faker("paragraph", nb_sentences=3)
    price = factory.LazyFunction(lambda: Decimal(f"{random.randint(10, 500)}.00"))
    show_discount = False
    unit_count = factory.Faker("random_int", min=0, max=100)
    is_listed = True
    images = factory.LazyFunction(lambda: [image_name("png"), image_name("jpg")])

    @factory.post_generation
    def categories(self, create, extracted, **kwargs):
        if create and extracted:
            self.categories.set(extracted)
