import attrs


@attrs.frozen(order=True)
class SeatPosition:
    row: str
    number: int

    @property
    def label(self) -> str:
        return f'{self.row}{self.number}'
