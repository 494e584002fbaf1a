"""Timed and repeated inline tests. Run with: microtest run examples/timing.py"""

import random

from microtest import Test, case, check


def fib(n):
    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a


Test("Fibonacci").time().run(lambda: check(fib(30) == 832040))


def sorting():
    values = random.sample(range(1000), 100)
    result = sorted(values)
    check(all(a <= b for a, b in zip(result, result[1:])))


Test("Sorting").time().repeat(20).run(sorting)


@case("Coin flip", timed=True, repeat=10)
def coin_flip():
    check(random.random() < 0.5)
