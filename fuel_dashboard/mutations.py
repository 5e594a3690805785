"""
Write operations against the backend: sale log, customer add, reward points.

Every operation issues a single POST and returns a MutationResult instead of
raising, so one failed action never affects the rest of the dashboard. The
backend's own ``error`` message is surfaced verbatim when it sends one;
otherwise a fallback tied to the operation is used.

RewardFlow adds the one multi-step recovery path: when a reward fails because
the customer does not exist, it can create the customer and retry the reward
once.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional
from loguru import logger

from .client import FuelApiClient, FuelApiConnectionError, FuelApiResponseError, embedded_error
from .models import Customer, Sale
from .validators import ValidationFailure

SALES_PATH = "/api/sales"
CUSTOMERS_PATH = "/api/customers"
REWARD_PATH = "/api/reward"

CUSTOMER_NOT_FOUND = "customer not found"
ADD_CUSTOMER_PROMPT = "Customer not found. Would you like to add them?"


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    message: str
    # Set when the backend reported the failure itself
    server_message: Optional[str] = None

    @property
    def customer_missing(self) -> bool:
        return not self.ok and CUSTOMER_NOT_FOUND in self.message.lower()


def _submit(
    client: FuelApiClient,
    path: str,
    payload: dict,
    *,
    fallback: str,
    success: str,
) -> MutationResult:
    try:
        body: Any = client.post_json(path, payload)
    except FuelApiResponseError as e:
        message = e.server_message or fallback
        logger.warning(f"POST {path} failed: {e}")
        return MutationResult(False, message, server_message=e.server_message)
    except FuelApiConnectionError as e:
        logger.warning(f"POST {path} failed: {e}")
        return MutationResult(False, fallback)

    # 2xx responses can still carry a domain error
    error = embedded_error(body)
    if error:
        logger.warning(f"POST {path} rejected: {error}")
        return MutationResult(False, error, server_message=error)

    logger.info(success)
    return MutationResult(True, success)


def log_sale(client: FuelApiClient, sale: Sale) -> MutationResult:
    logger.debug(f"Logging sale: {sale.to_payload()}")
    return _submit(
        client,
        SALES_PATH,
        sale.to_payload(),
        fallback="Failed to log sale",
        success="Sale logged successfully!",
    )


def add_customer(client: FuelApiClient, customer: Customer) -> MutationResult:
    return _submit(
        client,
        CUSTOMERS_PATH,
        {"name": customer.name},
        fallback="Failed to add customer",
        success="Customer added successfully!",
    )


def reward_points(client: FuelApiClient, customer: Customer) -> MutationResult:
    """Single reward attempt, no recovery."""
    if customer.points is None:
        raise ValueError("reward_points needs a customer with points")
    return _submit(
        client,
        REWARD_PATH,
        {"name": customer.name, "points": customer.points},
        fallback="Failed to reward points",
        success="Points rewarded successfully!",
    )


class RewardState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    FETCHING = "fetching"
    ERROR = "error"
    CONFIRMING_RECOVERY = "confirming_recovery"
    RETRYING = "retrying"


class RewardFlow:
    """
    Reward points with add-then-retry recovery for unknown customers.

    States:
        idle -> validating -> fetching -> idle (rewarded)
                                        -> error
                                        -> confirming_recovery -> error (declined)
                                                               -> retrying -> idle | error

    ``confirm`` is asked once per run; a failure while retrying is terminal.
    ``history`` lists every state visited during the last run.

    Usage:
        flow = RewardFlow(client, confirm=lambda msg: input(msg) == "y")
        result = flow.run(lambda: form.to_reward())
    """

    def __init__(self, client: FuelApiClient, confirm: Callable[[str], bool]):
        self.client = client
        self.confirm = confirm
        self.state = RewardState.IDLE
        self.history: list[RewardState] = [RewardState.IDLE]
        self.recovered = False

    def _enter(self, state: RewardState) -> None:
        logger.debug(f"reward: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def _fail(self, result: MutationResult) -> MutationResult:
        self._enter(RewardState.ERROR)
        return result

    def run(self, customer: Customer | Callable[[], Customer]) -> MutationResult:
        """
        Run the flow for ``customer``.

        ``customer`` may be a callable that builds (and validates) the
        customer; a ValidationFailure it raises ends the run in the error state.
        """
        self.state = RewardState.IDLE
        self.history = [RewardState.IDLE]
        self.recovered = False

        self._enter(RewardState.VALIDATING)
        try:
            target = customer() if callable(customer) else customer
            if target.points is None:
                raise ValidationFailure("Please provide both customer name and points.")
        except ValidationFailure as e:
            return self._fail(MutationResult(False, e.message))

        self._enter(RewardState.FETCHING)
        result = reward_points(self.client, target)
        if result.ok:
            self._enter(RewardState.IDLE)
            return result
        if not result.customer_missing:
            return self._fail(result)

        self._enter(RewardState.CONFIRMING_RECOVERY)
        if not self.confirm(ADD_CUSTOMER_PROMPT):
            logger.info(f"Not adding unknown customer {target.name!r}")
            return self._fail(result)

        self._enter(RewardState.RETRYING)
        added = add_customer(self.client, target)
        if not added.ok:
            return self._fail(added)

        retried = reward_points(self.client, target)
        if not retried.ok:
            return self._fail(retried)

        self.recovered = True
        self._enter(RewardState.IDLE)
        return retried
