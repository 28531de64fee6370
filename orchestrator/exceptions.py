class OrchestrationError(Exception):
    pass


class AllocationExistsError(OrchestrationError):
    def __init__(self, existing: int) -> None:
        super().__init__("Problem statements have already been allocated")
        self.existing = existing


class EmptyRosterError(OrchestrationError):
    pass
