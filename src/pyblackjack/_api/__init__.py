"""Gateway endpoint functions used by :mod:`pyblackjack.remote`."""
