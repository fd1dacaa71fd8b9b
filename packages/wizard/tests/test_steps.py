"""Tests for the wizard step state machine."""

from decimal import Decimal

import pytest

from sanad_core.exceptions import ValidationError
from sanad_core.models import ApplicationDraft, Category, UrgencyLevel
from sanad_core.validation import validate
from sanad_wizard.steps import StepController, WizardStep


@pytest.fixture
def controller(valid_draft) -> StepController:
    """Controller opened with category context."""
    return StepController(valid_draft, has_category_context=True)


class TestWizardStep:
    """Test suite for WizardStep."""

    def test_titles(self):
        assert WizardStep.SERVICE_SELECTION.title == "Service Selection"
        assert WizardStep.APPLICATION_DETAILS.title == "Application Details"
        assert WizardStep.UPLOAD_DOCUMENTS.title == "Upload Documents"
        assert WizardStep.REVIEW_AND_SUBMIT.title == "Review & Submit"

    def test_descriptions(self):
        assert WizardStep.UPLOAD_DOCUMENTS.description == "Provide supporting documents"

    def test_from_number(self):
        assert WizardStep.from_number(3) == WizardStep.UPLOAD_DOCUMENTS

    @pytest.mark.parametrize("number", [0, 5])
    def test_from_number_out_of_range(self, number):
        with pytest.raises(ValidationError):
            WizardStep.from_number(number)


class TestAdvance:
    """Test suite for StepController.advance."""

    def test_initial_step(self, controller):
        assert controller.current_step == WizardStep.SERVICE_SELECTION
        assert controller.is_first_step

    def test_advances_through_all_steps(self, controller):
        for expected in (2, 3, 4):
            transition = controller.advance()
            assert transition.moved
            assert transition.errors == {}
            assert controller.current_step == expected

    def test_stays_on_last_step(self, controller):
        for _ in range(3):
            controller.advance()

        transition = controller.advance()

        assert controller.is_last_step
        assert transition.moved is False
        assert transition.step == WizardStep.REVIEW_AND_SUBMIT

    def test_blocked_by_validation(self):
        controller = StepController(ApplicationDraft(), has_category_context=True)
        controller.advance()

        transition = controller.advance()

        assert transition.moved is False
        assert controller.current_step == WizardStep.APPLICATION_DETAILS
        assert set(transition.errors) == {"title", "description", "requestedAmount"}
        assert controller.errors == transition.errors

    def test_moves_iff_validation_passes(self):
        """advance() changes the step exactly when validate() is empty."""
        drafts = [
            ApplicationDraft(),
            ApplicationDraft(title="t", description="d", requested_amount=10),
            ApplicationDraft(title="t", description="", requested_amount=10),
            ApplicationDraft(
                title="t",
                description="d",
                requested_amount=5000,
                category=Category.FOOD_ASSISTANCE,
            ),
        ]
        for draft in drafts:
            for start in WizardStep:
                controller = StepController(draft, has_category_context=True, initial_step=start)
                errors = validate(start, draft)
                controller.advance()
                moved = controller.current_step != start
                if start == WizardStep.last():
                    assert not moved
                else:
                    assert moved == (errors == {})

    def test_errors_cleared_after_fix(self):
        draft = ApplicationDraft(category=Category.OTHER)
        controller = StepController(draft, has_category_context=True, initial_step=2)
        controller.advance()
        assert controller.errors

        draft.title = "Help"
        draft.description = "Situation"
        draft.requested_amount = 100
        controller.advance()

        assert controller.errors == {}
        assert controller.current_step == WizardStep.UPLOAD_DOCUMENTS


class TestRetreat:
    """Test suite for StepController.retreat."""

    def test_goes_back_without_validation(self):
        controller = StepController(ApplicationDraft(), has_category_context=True, initial_step=3)
        transition = controller.retreat()
        assert transition.moved
        assert controller.current_step == WizardStep.APPLICATION_DETAILS

    def test_stays_on_first_step(self, controller):
        transition = controller.retreat()
        assert transition.moved is False
        assert controller.current_step == WizardStep.SERVICE_SELECTION

    def test_clears_errors(self):
        controller = StepController(ApplicationDraft(), has_category_context=True, initial_step=2)
        controller.advance()
        controller.retreat()
        assert controller.errors == {}


class TestEntryGuard:
    """Test suite for the missing-context redirect."""

    def test_no_redirect_on_first_step(self):
        controller = StepController(ApplicationDraft(), has_category_context=False)
        assert controller.entry_guard() is None

    def test_redirect_when_deep_linked_without_context(self):
        controller = StepController(ApplicationDraft(), has_category_context=False, initial_step=3)
        redirect = controller.entry_guard()
        assert redirect is not None
        assert redirect.path == "/services"

    def test_no_redirect_with_context(self):
        controller = StepController(ApplicationDraft(), has_category_context=True, initial_step=3)
        assert controller.entry_guard() is None

    def test_advance_without_context_reports_redirect(self):
        controller = StepController(
            ApplicationDraft(),
            has_category_context=False,
            category_selection_path="/help/categories",
        )
        transition = controller.advance()
        assert transition.moved
        assert transition.redirect.path == "/help/categories"

    def test_invalid_initial_step(self):
        with pytest.raises(ValidationError):
            StepController(ApplicationDraft(), initial_step=9)


class TestSelectCategory:
    """Test suite for StepController.select_category."""

    def test_emergency_defaults_to_urgent(self, controller):
        controller.select_category(Category.EMERGENCY_ASSISTANCE)
        assert controller.draft.urgency_level == UrgencyLevel.URGENT
        assert controller.draft.requested_amount == Decimal("0")

    def test_switch_from_emergency_to_food(self, controller):
        """Urgency flips back to routine and the amount resets."""
        controller.select_category(Category.EMERGENCY_ASSISTANCE)
        controller.draft.requested_amount = Decimal("1200")
        assert controller.draft.urgency_level == UrgencyLevel.URGENT

        controller.select_category(Category.FOOD_ASSISTANCE)

        assert controller.draft.category == Category.FOOD_ASSISTANCE
        assert controller.draft.urgency_level == UrgencyLevel.ROUTINE
        assert controller.draft.requested_amount == Decimal("0")

    def test_reselecting_same_category_resets(self, controller):
        controller.select_category(Category.HOUSING_SUPPORT)
        controller.draft.requested_amount = Decimal("900")
        controller.draft.urgency_level = UrgencyLevel.CRITICAL

        controller.select_category(Category.HOUSING_SUPPORT)

        assert controller.draft.requested_amount == Decimal("0")
        assert controller.draft.urgency_level == UrgencyLevel.ROUTINE

    @pytest.mark.parametrize("category", list(Category))
    def test_defaults_for_every_category(self, controller, category):
        controller.draft.urgency_level = UrgencyLevel.CRITICAL
        controller.draft.requested_amount = Decimal("1")

        controller.select_category(category)

        option = controller.catalog.option_for(category)
        expected = UrgencyLevel.URGENT if option.urgent_by_default else UrgencyLevel.ROUTINE
        assert controller.draft.urgency_level == expected
        assert controller.draft.requested_amount == Decimal("0")

    def test_accepts_string_value(self, controller):
        assert controller.select_category("elderly_care") == Category.ELDERLY_CARE

    def test_rejects_unknown_category(self, controller):
        before = controller.draft.model_copy(deep=True)
        with pytest.raises(ValidationError):
            controller.select_category("pets")
        assert controller.draft == before

    def test_urgency_override_after_selection(self, controller):
        controller.select_category(Category.FOOD_ASSISTANCE)
        controller.draft.urgency_level = UrgencyLevel.CRITICAL
        assert controller.draft.urgency_level == UrgencyLevel.CRITICAL
