"""Option support — rebinding rules declared on ``Option[T]`` properties.

Builds on the engine's public rule model: reads a rule's expression,
installs an unwrap transformer, and gates validators on presence.
"""
