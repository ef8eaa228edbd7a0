"""
Pledge: Basic Usage Example

Demonstrates:
- Settling a cell from its initializer
- Late registration (still deferred)
- Automatic rejection of a raising initializer
- Deferred for settling from outside
"""

from pledge import Deferred, DeferredQueue, SettlementCell


def main():
    """Basic Pledge usage."""

    print("="*60)
    print("Pledge: Basic Usage Example")
    print("="*60)
    print()

    queue = DeferredQueue()

    # 1️⃣ Settle inside the initializer
    print("1️⃣ Fulfilling from the initializer...")
    cell = SettlementCell(lambda resolve, reject: resolve(42), scheduler=queue)
    cell.on_success(lambda value: print(f"  ✅ value: {value}"))
    print("  (registered; nothing printed yet)")
    queue.run_until_idle()
    print()

    # 2️⃣ Initializer raises
    print("2️⃣ Initializer that raises...")

    def broken(resolve, reject):
        raise ValueError("boom")

    (
        SettlementCell(broken, scheduler=queue)
        .on_failure(lambda err: print(f"  ❌ rejected: {err!r}"))
        .on_settle(lambda: print("  🏁 settled"))
    )
    queue.run_until_idle()
    print()

    # 3️⃣ Settle from outside
    print("3️⃣ Deferred settled later...")
    deferred = Deferred(scheduler=queue)
    deferred.cell.on_success(lambda value: print(f"  ✅ value: {value}"))
    deferred.resolve("from outside")
    deferred.resolve("ignored")
    queue.run_until_idle()
    print()

    print(f"Final: {cell!r}, {deferred!r}")


if __name__ == "__main__":
    main()
