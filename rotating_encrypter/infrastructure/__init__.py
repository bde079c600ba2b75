"""Infrastructure Layer - PASETO adapter, key codec, encrypter wiring."""
