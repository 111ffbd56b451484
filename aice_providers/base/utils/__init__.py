"""Pure helpers over provider-agnostic DTOs."""
