# factory-guy examples

# Meant to be run cell by cell (select a block and run it), or as a script.
# Use the comments as cell boundaries.

import asyncio
import logging

from factory_guy import FactoryGuy, FixtureAdapter, FixtureStore, MemoryStore, Schema, belongs_to, has_many

logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Define the fixtures
guy = FactoryGuy()

guy.define(
    "user",
    {
        "sequences": {"user_name": lambda n: f"User{n}"},
        "default": {"name": guy.generate("user_name")},
        "admin": {"name": "Admin"},
    },
)
guy.define(
    "project",
    {
        "default": {"title": "Project"},
        "project_with_admin": {"user": guy.association("admin")},
    },
)


# Build plain fixtures
print(guy.build("user"))
print(guy.build_list("admin", 2))
print(guy.build("project_with_admin"))


# Describe the relationships of the host data layer
schema = Schema()
schema.model("user", projects=has_many("project"))
schema.model("project", user=belongs_to("user"))


# Live records: back-references are linked whichever side comes first
store = MemoryStore(schema)
fixtures = FixtureStore(store, guy)

user = fixtures.make_fixture("user")
project = fixtures.make_fixture("project", user=user)
print(user, "->", list(user.get("projects")))

other = fixtures.make_fixture("project")
fixtures.make_fixture("admin", projects=[other])
print(other, "->", other.get("user"))


# Fixture arrays: the same links, held as ids
fixture_store = FixtureStore(MemoryStore(schema, adapter=FixtureAdapter()), guy)
user_json = fixture_store.make_fixture("user")
project_json = fixture_store.make_fixture("project", user=user_json["id"])
print(user_json, project_json)


# A parent that is still loading is linked once it resolves
async def deferred_link() -> None:
    store.push("user", {"id": 100, "name": "Late"})
    pending = asyncio.get_running_loop().create_future()
    late_project = fixtures.make_fixture("project", user=pending)
    pending.set_result(store.peek("user", 100))
    await asyncio.sleep(0)
    print(late_project, "in", list(store.peek("user", 100).get("projects")))


asyncio.run(deferred_link())


# Between tests
fixtures.reset()
print(guy.build("user"))
