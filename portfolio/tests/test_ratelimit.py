import unittest

from starlette.requests import Request

from portfolio.ratelimit import RateLimiter, client_key


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class RateLimiterTests(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.limiter = RateLimiter(max_requests=5, window_seconds=3600, clock=self.clock)

    def test_rejects_once_limit_reached(self):
        results = [self.limiter.hit("1.2.3.4") for _ in range(6)]
        self.assertEqual(results, [True] * 5 + [False])

    def test_keys_are_independent(self):
        for _ in range(5):
            self.limiter.hit("1.2.3.4")
        self.assertFalse(self.limiter.hit("1.2.3.4"))
        self.assertTrue(self.limiter.hit("5.6.7.8"))

    def test_window_rolls_forward(self):
        for _ in range(5):
            self.assertTrue(self.limiter.hit("1.2.3.4"))
            self.clock.now += 60
        self.assertFalse(self.limiter.hit("1.2.3.4"))

        # The first hit leaves the window one hour after it happened.
        self.clock.now = 1000.0 + 3600
        self.assertTrue(self.limiter.hit("1.2.3.4"))
        self.assertFalse(self.limiter.hit("1.2.3.4"))

    def test_retry_after(self):
        self.assertEqual(self.limiter.retry_after("1.2.3.4"), 0)
        for _ in range(5):
            self.limiter.hit("1.2.3.4")
        self.clock.now += 600
        self.assertEqual(self.limiter.retry_after("1.2.3.4"), 3000)

    def test_reset(self):
        for _ in range(5):
            self.limiter.hit("1.2.3.4")
        self.limiter.reset()
        self.assertTrue(self.limiter.hit("1.2.3.4"))

    def test_expired_clients_are_forgotten(self):
        for index in range(50):
            self.limiter.hit(f"10.0.0.{index}")
        self.assertEqual(len(self.limiter._hits), 50)

        self.clock.now += 3601
        self.assertTrue(self.limiter.hit("1.2.3.4"))
        self.assertEqual(len(self.limiter._hits), 1)

    def test_retry_after_drops_an_expired_key(self):
        self.limiter.hit("1.2.3.4")
        self.clock.now += 3601
        self.assertEqual(self.limiter.retry_after("1.2.3.4"), 0)
        self.assertNotIn("1.2.3.4", self.limiter._hits)


def make_request(forwarded=None, peer="192.0.2.10"):
    headers = []
    if forwarded is not None:
        headers.append((b"x-forwarded-for", forwarded.encode("latin-1")))
    return Request({"type": "http", "headers": headers, "client": (peer, 50000)})


class ClientKeyTests(unittest.TestCase):
    def test_no_trusted_proxy_uses_the_socket_peer(self):
        self.assertEqual(client_key(make_request("203.0.113.9")), "192.0.2.10")

    def test_one_trusted_proxy_uses_the_rightmost_entry(self):
        request = make_request("spoofed, 198.51.100.7")
        self.assertEqual(client_key(request, trusted_hops=1), "198.51.100.7")

    def test_two_trusted_proxies(self):
        request = make_request("spoofed, 198.51.100.7, 10.1.1.1")
        self.assertEqual(client_key(request, trusted_hops=2), "198.51.100.7")

    def test_missing_header_behind_a_proxy_falls_back_to_the_peer(self):
        self.assertEqual(client_key(make_request(), trusted_hops=1), "192.0.2.10")

    def test_short_chain_uses_the_leftmost_entry(self):
        request = make_request("198.51.100.7")
        self.assertEqual(client_key(request, trusted_hops=3), "198.51.100.7")


if __name__ == "__main__":
    unittest.main()
