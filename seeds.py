from decimal import Decimal

from loguru import logger

from agrirent import create_app
from agrirent.models.store import Store
from agrirent.utils.security import generate_hash


def ensure_user(store: Store, username: str, password: str):
    """
    Ensure a user with `username` exists in the store.
    - If exists: update password hash (idempotent).
    - If not:   create a new user.
    """
    u = store.find_user(username)
    if u:
        u["password_hash"] = generate_hash(password)
        return u["user_id"]
    else:
        return store.create_user(username, generate_hash(password))


def main():
    app = create_app()
    with app.app_context():
        store = Store.instance()

        # ---- Demo accounts: one tool owner, one renter ----
        owner = ensure_user(store, "ramesh", "Owner123")
        ensure_user(store, "meera", "Renter123")

        # ---- Demo tools (create only if none exist) ----
        if not store.tools:
            store.create_tool(owner, "Mahindra 575 Tractor", "machinery", Decimal("1500"),
                              location="Nashik, Maharashtra", description="45 HP, with driver on request")
            store.create_tool(owner, "Rotavator 6 ft", "tillage", Decimal("600"),
                              location="Nashik, Maharashtra")
            store.create_tool(owner, "Battery Knapsack Sprayer", "spraying", Decimal("120"),
                              location="Niphad, Maharashtra")
            store.create_tool(owner, "Seed Drill 9 tyne", "sowing", Decimal("450"),
                              location="Sinnar, Maharashtra", available=False)

        store.save()

        logger.info("Seed complete.")
        logger.info("Owner login:  ramesh / Owner123")
        logger.info("Renter login: meera / Renter123")


if __name__ == "__main__":
    main()
