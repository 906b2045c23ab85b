"""Desktop simulator for LEAFFALL."""
