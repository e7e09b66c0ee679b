"""Redis-backed document store for users and products."""

import json
from typing import Dict, List, Optional, Any
import redis


def get_client(redis_url: str):
    """
    Connect to Redis.

    Returns:
        redis.Redis: Client decoding responses to str
    """
    return redis.from_url(redis_url, decode_responses=True)


class Store:
    """
    Users and products kept as JSON documents under prefixed keys.

    Key layout:
    - user:<id>            user document
    - email:<email>        user id (unique index, set with NX)
    - product:<id>         product document
    - product_id:<pid>     product id (unique public identifier index)
    - products             list of product ids in insertion order
    """

    USER_PREFIX = "user:"
    EMAIL_INDEX = "email:"
    PRODUCT_PREFIX = "product:"
    PRODUCT_ID_INDEX = "product_id:"
    PRODUCT_LIST = "products"

    def __init__(self, client):
        self.client = client

    def ping(self) -> bool:
        return bool(self.client.ping())

    # ==================== Users ====================

    def insert_user(self, record: Dict[str, Any]) -> bool:
        """
        Insert a user document.

        Returns:
            bool: False if the email is already registered
        """
        email_key = f"{self.EMAIL_INDEX}{record['email']}"
        # Claiming the email index first keeps emails unique across concurrent signups
        if not self.client.set(email_key, record['id'], nx=True):
            return False
        self.client.set(f"{self.USER_PREFIX}{record['id']}", json.dumps(record))
        return True

    def find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        user_id = self.client.get(f"{self.EMAIL_INDEX}{email}")
        if not user_id:
            return None
        return self.find_user_by_id(user_id)

    def find_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        data = self.client.get(f"{self.USER_PREFIX}{user_id}")
        if not data:
            return None
        return json.loads(data)

    # ==================== Products ====================

    def insert_product(self, record: Dict[str, Any]) -> bool:
        """
        Insert a product document and append it to the listing order.

        Returns:
            bool: False if the public product id is already taken
        """
        index_key = f"{self.PRODUCT_ID_INDEX}{record['product_id']}"
        if not self.client.set(index_key, record['id'], nx=True):
            return False
        pipe = self.client.pipeline()
        pipe.set(f"{self.PRODUCT_PREFIX}{record['id']}", json.dumps(record))
        pipe.rpush(self.PRODUCT_LIST, record['id'])
        pipe.execute()
        return True

    def find_products(self) -> List[Dict[str, Any]]:
        ids = self.client.lrange(self.PRODUCT_LIST, 0, -1)
        if not ids:
            return []
        docs = self.client.mget([f"{self.PRODUCT_PREFIX}{i}" for i in ids])
        return [json.loads(d) for d in docs if d]

    def find_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        data = self.client.get(f"{self.PRODUCT_PREFIX}{product_id}")
        if not data:
            return None
        return json.loads(data)

    def replace_product(self, record: Dict[str, Any], previous_product_id: Optional[str] = None) -> bool:
        """
        Overwrite an existing product document.

        Returns:
            bool: False if the new public product id belongs to another product
        """
        if previous_product_id and previous_product_id != record['product_id']:
            index_key = f"{self.PRODUCT_ID_INDEX}{record['product_id']}"
            if not self.client.set(index_key, record['id'], nx=True):
                return False
            self.client.delete(f"{self.PRODUCT_ID_INDEX}{previous_product_id}")
        self.client.set(f"{self.PRODUCT_PREFIX}{record['id']}", json.dumps(record))
        return True

    def delete_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        """
        Remove a product.

        Returns:
            dict: The deleted document, or None if it did not exist
        """
        record = self.find_product(product_id)
        if record is None:
            return None
        pipe = self.client.pipeline()
        pipe.delete(f"{self.PRODUCT_PREFIX}{product_id}")
        pipe.delete(f"{self.PRODUCT_ID_INDEX}{record['product_id']}")
        pipe.lrem(self.PRODUCT_LIST, 0, product_id)
        pipe.execute()
        return record

    def reset(self):
        """
        Delete every user and product key.
        WARNING: This will permanently delete all data!
        """
        patterns = [
            f"{self.USER_PREFIX}*", f"{self.EMAIL_INDEX}*",
            f"{self.PRODUCT_PREFIX}*", f"{self.PRODUCT_ID_INDEX}*",
        ]
        deleted = 0
        for pattern in patterns:
            for key in self.client.scan_iter(match=pattern):
                deleted += self.client.delete(key)
        deleted += self.client.delete(self.PRODUCT_LIST)
        return deleted


if __name__ == "__main__":
    """
    Run this script directly to check or reset the store:

    Usage:
        python src/database.py --ping       # Check the connection
        python src/database.py --reset      # Delete all users and products
    """
    import sys
    from config import load_settings

    settings = load_settings()
    store = Store(get_client(settings.redis_url))

    try:
        if "--reset" in sys.argv:
            print("⚠️  RESET MODE: This will delete all data!")
            confirm = input("Type 'yes' to confirm: ")
            if confirm.lower() == 'yes':
                count = store.reset()
                print(f"✅ Deleted {count} keys")
            else:
                print("❌ Reset cancelled")
        else:
            store.ping()
            print(f"✅ Connected to Redis at {settings.redis_url}")
            print(f"  Products: {len(store.find_products())}")
    except redis.RedisError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)
