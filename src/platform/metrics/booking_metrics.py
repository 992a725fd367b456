from prometheus_client import Counter, Histogram


class BookingMetrics:
    """
    Seat booking business metrics

    Tracks hold outcomes, payment resolutions and expiry sweeps per screening.
    """

    def __init__(self) -> None:
        self.hold_requests = Counter(
            'seat_hold_requests_total',
            'Total seat hold requests',
            ['screening_id', 'result'],  # result: held/unavailable/rejected
        )

        self.hold_duration = Histogram(
            'seat_hold_duration_seconds',
            'Seat hold processing time including lock wait',
            ['screening_id'],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0],
        )

        self.reservation_transitions = Counter(
            'reservation_transitions_total',
            'Accepted reservation state transitions',
            ['to_status'],
        )

        self.seats_released = Counter(
            'seats_released_total',
            'Seats returned to availability',
            ['reason'],  # reason: expired/cancelled/payment_failed
        )

        self.sweep_runs = Counter(
            'hold_sweep_runs_total',
            'Expiry sweep runs',
            ['result'],  # result: ok/error
        )

        self.sweep_duration = Histogram(
            'hold_sweep_duration_seconds',
            'Expiry sweep duration',
            buckets=[0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
        )

    def record_hold(self, *, screening_id: int, result: str, duration: float) -> None:
        self.hold_requests.labels(screening_id=screening_id, result=result).inc()
        self.hold_duration.labels(screening_id=screening_id).observe(duration)

    def record_transition(self, *, to_status: str) -> None:
        self.reservation_transitions.labels(to_status=to_status).inc()

    def record_seats_released(self, *, reason: str, count: int) -> None:
        self.seats_released.labels(reason=reason).inc(count)

    def record_sweep(self, *, result: str, duration: float) -> None:
        self.sweep_runs.labels(result=result).inc()
        self.sweep_duration.observe(duration)


# Global metrics instance
metrics = BookingMetrics()
