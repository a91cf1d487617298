"""Program core: address derivation, record layout and instruction processing."""
