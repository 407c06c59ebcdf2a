from rxstore import Store, SubscriptionConfig, subject_factory

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Initializing observables")
print("-" * 100)
print()

# A store holds observables under key paths. Dotted strings and segment lists are equivalent.
store = Store()
store.initialize("counter", 0)
store.initialize("user.name", "Alice")
store.initialize(["user", "age"], 30)

print(f"user.name initialized: {store.is_initialized(['user', 'name'])}")
print(f"user initialized: {store.is_initialized('user')}")  # Only a namespace, not an observable

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Subscribing")
print("-" * 100)
print()


class CounterLabel:
    def __init__(self, name):
        self.name = name

    def show(self, value):
        print(f"[{self.name}] counter is {value}")


label = CounterLabel("label")

# The default store replays the current value on subscribe, so this prints "counter is 0" right away.
store.subscribe(
    label,
    [SubscriptionConfig(observable_key="counter", on_value=lambda s, v: s.show(v))],
)

store.publish("counter", 1)
store.publish("counter", 2)

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Filtering values per subscriber")
print("-" * 100)
print()

doubled = CounterLabel("doubled")

# Filters see the subscriber too, so one config can behave differently per subscriber.
store.subscribe(
    doubled,
    [
        {
            "observable_key": "counter",
            "on_value": lambda s, v: s.show(v),
            "filter": lambda s, v: v * 2,
        }
    ],
)

store.publish("counter", 3)  # label prints 3, doubled prints 6

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Unsubscribing")
print("-" * 100)
print()

store.unsubscribe(label)
print(f"label subscribed: {store.has_subscriptions(label)}")

store.publish("counter", 4)  # Only doubled prints

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Class-level subscriptions")
print("-" * 100)
print()


class Profile:
    # Read by store.subscribe(profile) when no configs are passed
    subscriptions = [
        {"observable_key": "user.name", "on_value": lambda p, name: p.update("name", name)},
        {"observable_key": "user.age", "on_value": lambda p, age: p.update("age", age)},
    ]

    def __init__(self):
        self.fields = {}

    def update(self, field, value):
        self.fields[field] = value
        print(f"Profile: {self.fields}")


profile = Profile()
store.subscribe(profile)
store.publish("user.age", 31)

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Stores without replay")
print("-" * 100)
print()

# With plain subjects, subscribers only see values published after they subscribed.
events = Store(factory=subject_factory)
events.initialize("clicks", None)
events.subscribe(label, [{"observable_key": "clicks", "on_value": lambda s, v: s.show(v)}])
events.publish("clicks", "first click")
