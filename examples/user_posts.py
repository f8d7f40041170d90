import os
from dataclasses import dataclass

from sql_wrapper import Schema, SchemaManager, SQLiteStore, column


@dataclass
class Post:
    Title: str = column("TEXT NOT NULL")
    Body: str = column("TEXT")


@dataclass
class User:
    Name: str = column("VARCHAR(64) NOT NULL")
    Posts: list[Post] = column(name="PostID", relation="one-to-many")


def run_example():
    db_path = "example_user_posts.db"
    if os.path.exists(db_path):
        os.remove(db_path)

    print("--- sql_wrapper: One-to-Many Example ---")

    hello = Post(Title="Hello", Body="First post")
    again = Post(Title="Again", Body="Second post")

    with SQLiteStore(db_path) as store:
        manager = SchemaManager()
        posts = Schema(store, Post, manager)
        users = Schema(store, User, manager)

        # Referenced rows must be stored first
        posts.insert(hello)
        posts.insert(again)
        users.insert(User(Name="ada", Posts=[hello, again]))

        print(f"Junction rows: {store.query('SELECT * FROM UserPost ORDER BY rowid;')}")

    # 2. Load everything back in a new session
    with SQLiteStore(db_path) as store:
        manager = SchemaManager()
        posts = Schema(store, Post, manager)
        users = Schema(store, User, manager)
        posts.read()
        users.read()

        for identity, user in users.get().items():
            titles = [post.Title for post in user.Posts]
            print(f"User {identity}: {user.Name} wrote {titles}")

    print("\nExample finished. Database saved to", db_path)


if __name__ == "__main__":
    run_example()
