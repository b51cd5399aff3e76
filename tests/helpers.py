"""Constants and helpers shared by the test suite."""

T = 1_700_000_000
HOUR = 3600

HOST = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
ALICE = "alice"
BOB = "bob"
CAROL = "carol"


def proof_link(handle: str, post: int = 1509563457811017729) -> str:
    return f"https://twitter.com/{handle.lstrip('@')}/status/{post}"
