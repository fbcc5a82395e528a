from .console import ConsoleValidationView
