"""Host UI adapters for history stores."""
