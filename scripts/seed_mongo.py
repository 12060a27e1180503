#!/usr/bin/env python3
"""
Seed MongoDB with sample nomads and swipes from data/users.json.
Run this once to populate MongoDB, then set USE_MONGO=true.
"""

import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from route_matcher.schemas.route import SwipeRecord, UserProfile


def seed_mongodb(
    json_path: str = "data/users.json",
    mongo_uri: str = "mongodb://localhost:27017",
    db_name: str = "route_matcher",
):
    """
    Load the users file into MongoDB.

    Args:
        json_path: Path to the users JSON file
        mongo_uri: MongoDB connection string
        db_name: Database name
    """
    try:
        from pymongo import MongoClient

        if not os.path.exists(json_path):
            json_path = os.path.join(os.path.dirname(__file__), "..", "data", "users.json")

        if not os.path.exists(json_path):
            raise FileNotFoundError(f"Users file not found: {json_path}")

        print(f"📂 Reading users from {json_path}")

        with open(json_path, "r", encoding="utf-8") as f:
            payload = json.load(f)

        # Validate before touching the database
        users = [UserProfile(**u) for u in payload.get("users", [])]
        swipes = [SwipeRecord(**s) for s in payload.get("swipes", [])]

        print(f"📊 Loaded: {len(users)} users, {len(swipes)} swipes")

        client = MongoClient(mongo_uri, serverSelectionTimeoutMS=5000)
        client.admin.command("ping")
        db = client[db_name]

        print(f"✅ Connected to MongoDB: {mongo_uri}/{db_name}")

        db.users.delete_many({})
        db.swipes.delete_many({})
        print("🗑️  Cleared existing collections")

        if users:
            result = db.users.insert_many([u.model_dump() for u in users])
            print(f"✅ Inserted {len(result.inserted_ids)} users")

        if swipes:
            swipe_docs = []
            for s in swipes:
                doc = s.model_dump()
                doc["action"] = s.action.value
                swipe_docs.append(doc)
            result = db.swipes.insert_many(swipe_docs)
            print(f"✅ Inserted {len(result.inserted_ids)} swipes")

        db.users.create_index("user_id", unique=True)
        db.swipes.create_index([("swiper_id", 1), ("swiped_id", 1)], unique=True)
        print("✅ Created database indices")

        version = datetime.now(timezone.utc).isoformat()
        db.metadata.update_one(
            {"type": "data_version"},
            {"$set": {"type": "data_version", "version": version}},
            upsert=True,
        )
        print(f"✅ Stored data version: {version}")

        client.close()

        print("\n🎉 MongoDB seeding complete!")
        print("\n📌 Next steps:")
        print(f"   1. Set MONGODB_URI={mongo_uri} and MONGODB_DB_NAME={db_name}")
        print("   2. Set USE_MONGO=true")
        print("   3. Restart the service")

        return True

    except Exception as e:
        print(f"❌ Error seeding MongoDB: {e}")
        import traceback

        traceback.print_exc()
        return False


if __name__ == "__main__":
    mongo_uri = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    db_name = os.getenv("MONGODB_DB_NAME", "route_matcher")

    print("=" * 60)
    print("🌱 MongoDB Data Seeding Script")
    print("=" * 60)
    print(f"MongoDB URI: {mongo_uri}")
    print(f"Database: {db_name}")
    print()

    success = seed_mongodb(mongo_uri=mongo_uri, db_name=db_name)
    sys.exit(0 if success else 1)
