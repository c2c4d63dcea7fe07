def toggle(open_index, index):
    """
    Single-expansion toggle.
    Clicking the open panel closes it; clicking any other panel opens it
    (and implicitly closes whatever was open before).
    """
    return None if open_index == index else index


def parse_open_index(value):
    """Reads an `open` query value. Anything that isn't a non-negative int means 'all collapsed'."""
    try:
        index = int(value)
    except (TypeError, ValueError):
        return None
    return index if index >= 0 else None


class Accordion:
    """
    Tracks which single item (by index, or none) of a static list is expanded.
    The state is never stored server-side; views rebuild it from the request.
    """

    def __init__(self, items, open_index=None):
        self.items = list(items)
        if open_index is not None:
            self._check_index(open_index)
        self.open_index = open_index

    def _check_index(self, index):
        if not 0 <= index < len(self.items):
            raise IndexError(f"Accordion index {index} out of range (0-{len(self.items) - 1}).")

    def toggle(self, index):
        self._check_index(index)
        self.open_index = toggle(self.open_index, index)
        return self.open_index

    def is_open(self, index):
        return self.open_index == index

    def entries(self):
        """Items annotated with their index and open state, ready for templates."""
        return [
            {**item, 'index': i, 'is_open': self.is_open(i)}
            for i, item in enumerate(self.items)
        ]
