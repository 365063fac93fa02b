"""Domain: контракты, интерфейсы и исключения."""
