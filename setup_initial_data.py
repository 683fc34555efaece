#!/usr/bin/env python
"""
Setup script to populate the water billing system with initial data.
Run this after `python manage.py migrate`.
"""
import os
import django

# Setup Django environment
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'community_water.settings')
django.setup()

from django.contrib.auth.hashers import make_password
from django.db import transaction

from billing.accounts import sync_meter_sequence
from billing.models import Account, PriceSetting
from billing.services import set_water_price
from decimal import Decimal

ACCOUNTS = [
    {
        'name': 'System Administrator',
        'address': '000 System Street',
        'phone_number': '5550000',
        'meter_id': 'SYS001',
        'role': Account.ROLE_SUPER_ADMIN,
        'password': 'superadminpassword',
    },
    {
        'name': 'Billing Officer',
        'address': '100 Main Street',
        'phone_number': '5550100',
        'meter_id': 'ADM001',
        'role': Account.ROLE_ADMIN,
        'password': 'adminpassword',
    },
    {
        'name': 'Alice Johnson',
        'address': '123 Oak Street',
        'phone_number': '5550101',
        'meter_id': 'WTR001',
        'role': Account.ROLE_USER,
        'password': 'password123',
    },
    {
        'name': 'Bob Williams',
        'address': '456 Pine Lane',
        'phone_number': '5550102',
        'meter_id': 'WTR002',
        'role': Account.ROLE_USER,
        'password': 'password123',
    },
    {
        'name': 'Charlie Brown',
        'address': '789 Maple Road',
        'phone_number': '5550103',
        'meter_id': 'WTR003',
        'role': Account.ROLE_USER,
        'password': 'password123',
    },
]


def create_water_price():
    """Store the default price per unit"""
    print("🔧 Setting water price...")

    if PriceSetting.objects.filter(key=PriceSetting.WATER_PRICE_KEY).exists():
        print("✅ Water price already set")
        return

    price = set_water_price(Decimal('1.5'))
    print(f"✅ Water price set to {price} per unit")


def create_sample_accounts():
    """Create the administrators and some sample users"""
    print("\n👥 Creating accounts...")

    created_count = 0
    for data in ACCOUNTS:
        defaults = dict(data, password=make_password(data['password']))
        account, created = Account.objects.get_or_create(
            phone_number=data['phone_number'],
            defaults=defaults,
        )
        if created:
            print(f"✅ Created {account.get_role_display()}: {account.meter_id} - {account.name}")
            created_count += 1
        else:
            print(f"✅ Account already exists: {account.meter_id}")

    print(f"\n📊 Summary: {created_count} new accounts created")


def report_meter_sequence():
    highest = sync_meter_sequence()
    print(f"✅ Next meter ID number: {highest + 1}")


def main():
    print("🚀 Setting up Community Water Billing...")
    print("=" * 50)

    with transaction.atomic():
        create_water_price()
        create_sample_accounts()
        report_meter_sequence()

    print("\n" + "=" * 50)
    print("🎉 Initial setup complete!")
    print("\nNext Steps:")
    print("1. Start the server: python manage.py runserver")
    print("2. POST {\"action\": ..., \"payload\": ...} to http://127.0.0.1:8000/api/")
    print("3. Mark past-due bills: python manage.py sweep_overdue")
    print("\n💧 Your water billing system is ready to use!")

if __name__ == '__main__':
    main()
