"""Checkout Store: step machine and the buyer's checkout selections.

Steps run address -> delivery -> payment -> review -> confirmation.
Moving forward requires the selections the target step depends on;
moving back is always allowed. Payment outcomes are recorded here as
reported by the gateway, never computed.
"""

from __future__ import annotations

from typing import List, Optional, Union

from storefront.shared.domain.models import (
    CHECKOUT_STEP_ORDER,
    Address,
    CheckoutStep,
    CheckoutSummary,
    DeliveryOption,
    PaymentMethod,
    PaymentState,
    PaymentStatus,
    PlacedOrder,
    SavedPaymentMethod,
)

from .base import ObservableStore

StepLike = Union[CheckoutStep, str]


class CheckoutStore(ObservableStore):
    def __init__(self) -> None:
        super().__init__()
        self._reset_state()

    # --- Steps ---

    def set_current_step(self, step: StepLike) -> bool:
        """Jump to ``step`` if its prerequisites are met."""
        target = CheckoutStep(step)
        if not self.can_proceed_to_step(target):
            self._logger.debug(f"Checkout step {target.value} blocked from {self.current_step.value}")
            return False
        self.current_step = target
        self._commit()
        return True

    def go_to_next_step(self) -> bool:
        """Complete the current step and advance one step."""
        index = CHECKOUT_STEP_ORDER.index(self.current_step)
        if index == len(CHECKOUT_STEP_ORDER) - 1:
            return False
        target = CHECKOUT_STEP_ORDER[index + 1]
        if not self.can_proceed_to_step(target):
            self._logger.debug(f"Checkout step {target.value} blocked from {self.current_step.value}")
            return False
        if self.current_step not in self.completed_steps:
            self.completed_steps.append(self.current_step)
        self.current_step = target
        self._commit()
        return True

    def go_to_previous_step(self) -> bool:
        index = CHECKOUT_STEP_ORDER.index(self.current_step)
        if index == 0:
            return False
        self.current_step = CHECKOUT_STEP_ORDER[index - 1]
        self._commit()
        return True

    def mark_step_completed(self, step: StepLike) -> None:
        step = CheckoutStep(step)
        if step not in self.completed_steps:
            self.completed_steps.append(step)
            self._commit()

    def is_step_completed(self, step: StepLike) -> bool:
        return CheckoutStep(step) in self.completed_steps

    def can_proceed_to_step(self, step: StepLike) -> bool:
        target = CheckoutStep(step)
        if CHECKOUT_STEP_ORDER.index(target) <= CHECKOUT_STEP_ORDER.index(self.current_step):
            return True

        has_address = self.shipping_address is not None
        has_delivery = self.delivery_option is not None
        if target is CheckoutStep.DELIVERY:
            return has_address
        if target is CheckoutStep.PAYMENT:
            return has_address and has_delivery
        if target is CheckoutStep.REVIEW:
            return has_address and has_delivery and self._has_payment_method()
        if target is CheckoutStep.CONFIRMATION:
            return self.payment.status == "success"
        return True

    # --- Address & delivery ---

    def set_shipping_address(self, address: Optional[Address]) -> None:
        self.shipping_address = address
        self._commit()

    def set_billing_address(self, address: Optional[Address]) -> None:
        self.billing_address = address
        self._commit()

    def set_use_same_as_billing(self, use_same: bool) -> None:
        self.use_same_as_billing = use_same
        self._commit()

    def set_delivery_instructions(self, instructions: str) -> None:
        self.delivery_instructions = instructions
        self._commit()

    def set_delivery_option(self, option: Optional[DeliveryOption]) -> None:
        self.delivery_option = option
        self._commit()

    # --- Payment ---

    def set_selected_payment_method(self, method: Optional[SavedPaymentMethod]) -> None:
        """Pay with a saved method; clears any new method being entered."""
        self.selected_payment_method = method
        self.new_payment_method = None
        self._commit()

    def set_new_payment_method(self, method: Optional[PaymentMethod]) -> None:
        self.new_payment_method = method
        self.selected_payment_method = None
        self._commit()

    def set_payment_status(self, status: PaymentStatus) -> None:
        self._update_payment(status=status)

    def set_payment_error(self, error: Optional[str]) -> None:
        """Record a gateway failure; an error forces the status to failed."""
        update = {"error": error}
        if error:
            update["status"] = "failed"
        self._update_payment(**update)

    def set_payment_transaction_id(self, transaction_id: Optional[str]) -> None:
        self._update_payment(transaction_id=transaction_id)

    def set_gateway_url(self, url: Optional[str]) -> None:
        self._update_payment(gateway_url=url)

    def set_save_payment_method(self, save: bool) -> None:
        self.save_payment_method = save
        self._commit()

    def increment_retry_count(self) -> int:
        self._update_payment(retry_count=self.payment.retry_count + 1)
        return self.payment.retry_count

    def reset_payment(self) -> None:
        self.payment = PaymentState()
        self._commit()

    # --- Order, loading & error ---

    def set_placed_order(self, order: Optional[PlacedOrder]) -> None:
        self.placed_order = order
        self._commit()

    def set_processing(self, processing: bool) -> None:
        self.is_processing = processing
        self._commit()

    def set_error(self, error: Optional[str]) -> None:
        self.error = error
        self._commit()

    def checkout_summary(self) -> CheckoutSummary:
        return CheckoutSummary(
            has_shipping_address=self.shipping_address is not None,
            has_billing_address=self.use_same_as_billing or self.billing_address is not None,
            has_delivery_option=self.delivery_option is not None,
            has_payment_method=self._has_payment_method(),
        )

    def reset(self) -> None:
        self._reset_state()
        self._commit()

    def _has_payment_method(self) -> bool:
        return self.selected_payment_method is not None or self.new_payment_method is not None

    def _update_payment(self, **changes) -> None:
        self.payment = self.payment.model_copy(update=changes)
        self._commit()

    def _reset_state(self) -> None:
        self.current_step = CheckoutStep.ADDRESS
        self.completed_steps: List[CheckoutStep] = []
        self.shipping_address: Optional[Address] = None
        self.billing_address: Optional[Address] = None
        self.use_same_as_billing = True
        self.delivery_instructions = ""
        self.delivery_option: Optional[DeliveryOption] = None
        self.selected_payment_method: Optional[SavedPaymentMethod] = None
        self.new_payment_method: Optional[PaymentMethod] = None
        self.payment = PaymentState()
        self.save_payment_method = False
        self.placed_order: Optional[PlacedOrder] = None
        self.is_processing = False
        self.error: Optional[str] = None
