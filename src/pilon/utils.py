"""Integer arithmetic helpers shared by the pileup engine and tracks."""


def round_div(n: int, d: int) -> int:
    """Divide rounding half up; zero when the divisor is not positive."""
    if d > 0:
        return (n + d // 2) // d
    return 0


def pct(n: int, d: int) -> int:
    """Rounded integer percentage of ``n`` over ``d``."""
    return round_div(100 * n, d)
