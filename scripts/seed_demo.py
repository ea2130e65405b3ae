#!/usr/bin/env python3
"""
Seed script to create a demo bar with menu, payment methods and an owner login
"""

import asyncio


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select

    from tableside.database import SessionLocal, engine, Base
    from tableside.models.menu import AddOn, Category, MenuItem, Variation
    from tableside.models.site import PaymentMethod, SiteSetting
    from tableside.models.staff import StaffRole
    from tableside.models.user import User
    from tableside.services.staff import StaffProvisioner

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        result = await db.execute(select(User).where(User.email == "owner@tableside.bar"))
        if result.scalar_one_or_none():
            print("Demo data already exists. Skipping...")
            return

        print("Creating owner account...")
        owner = await StaffProvisioner(db).provision(
            email="owner@tableside.bar",
            password="owner123",
            display_name="Bar Owner",
            role=StaffRole.OWNER,
        )
        print(f"Created owner: {owner.email} (ID: {owner.id})")

        print("Creating site settings...")
        settings_rows = [
            ("site_name", "Tableside Bar", "text", "Name shown in the header"),
            ("site_logo", "", "image", "Logo URL"),
            ("site_description", "Cocktails, coffee and small plates", "text", "Tagline"),
            ("currency", "₱", "text", "Currency symbol"),
            ("currency_code", "PHP", "text", "ISO currency code"),
            ("cart_item_limit", "50", "number", "Maximum items per order"),
        ]
        for key, value, kind, description in settings_rows:
            db.add(SiteSetting(id=key, value=value, type=kind, description=description))

        print("Creating payment methods...")
        db.add(PaymentMethod(
            id="gcash",
            name="GCash",
            account_number="09XX XXX XXXX",
            account_name="Tableside Bar",
            qr_code_url="https://example.com/qr/gcash.png",
            sort_order=1,
        ))
        db.add(PaymentMethod(
            id="maya",
            name="Maya",
            account_number="09XX XXX XXXX",
            account_name="Tableside Bar",
            qr_code_url="https://example.com/qr/maya.png",
            sort_order=2,
        ))

        print("Creating menu...")
        categories = [
            {"id": "cocktails", "name": "Cocktails", "icon": "🍸", "sort_order": 1},
            {"id": "coffee", "name": "Coffee", "icon": "☕", "sort_order": 2},
            {"id": "bites", "name": "Bites", "icon": "🍟", "sort_order": 3},
        ]
        for category_data in categories:
            db.add(Category(active=True, **category_data))
        await db.flush()

        # Prices in cents
        menu_items = [
            {"name": "Mojito", "description": "Rum, lime, mint and soda", "base_price_cents": 25000, "category_id": "cocktails", "popular": True},
            {"name": "Old Fashioned", "description": "Bourbon, bitters, orange peel", "base_price_cents": 32000, "category_id": "cocktails"},
            {"name": "Espresso Martini", "description": "Vodka, espresso, coffee liqueur", "base_price_cents": 30000, "category_id": "cocktails", "popular": True},
            {"name": "Americano", "description": "Double shot over hot water", "base_price_cents": 12000, "category_id": "coffee"},
            {"name": "Spanish Latte", "description": "Espresso with sweetened milk", "base_price_cents": 15000, "category_id": "coffee", "popular": True},
            {"name": "Truffle Fries", "description": "Parmesan and truffle oil", "base_price_cents": 18000, "category_id": "bites"},
            {"name": "Chicken Wings", "description": "Six pieces, choice of sauce", "base_price_cents": 28000, "category_id": "bites"},
        ]

        for item_data in menu_items:
            item = MenuItem(available=True, **item_data)

            if item_data["category_id"] == "coffee":
                item.variations = [
                    Variation(name="Regular", price_cents=0, sort_order=1),
                    Variation(name="Large", price_cents=3000, sort_order=2),
                ]
                item.add_ons = [
                    AddOn(name="Extra shot", price_cents=4000, category="extras"),
                    AddOn(name="Oat milk", price_cents=3000, category="milk"),
                ]
            elif item_data["category_id"] == "bites":
                item.add_ons = [AddOn(name="Extra dip", price_cents=2000, category="extras")]

            db.add(item)

        await db.commit()

        print(f"""
Demo data created successfully!

Owner:
  Email: owner@tableside.bar
  Password: owner123

Menu: {len(menu_items)} items in {len(categories)} categories
Payment methods: GCash, Maya
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
