"""Planet Tycoon: colony idle/tycoon simulation served over a JSON API."""
