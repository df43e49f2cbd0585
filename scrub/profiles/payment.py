"""
Payment card profile.

Card numbers keep the issuer prefix (first 6) and the last 4 digits visible,
the usual PCI-DSS display rule. Numbers shorter than 15 digits only keep the
prefix. CVV and PIN values are always fully masked.
"""

from ..base_profile import FieldPolicy, PartialMaskConfig, PolicyMap, ScrubProfile

CARD_NUMBER_MASK = PartialMaskConfig(
    enabled=True,
    min_field_len=13,
    max_field_len=19,
    visible_front_len=6,
    visible_back_only_if_len_greater_than=15,
    visible_back_len=4,
)


class PaymentCardProfile(ScrubProfile):

    CARD_NUMBER_FIELDS = ("cardnumber", "card_number", "pan", "ccnumber")
    CARD_SECRET_FIELDS = ("cvv", "cvc", "pin")

    @property
    def name(self) -> str:
        return "payment_card"

    @property
    def description(self) -> str:
        return "Card numbers partially masked (first 6 / last 4), CVV and PIN fully masked"

    def get_field_policies(self) -> PolicyMap:
        policies: PolicyMap = {
            field_name: FieldPolicy(symbol="*", partial=CARD_NUMBER_MASK)
            for field_name in self.CARD_NUMBER_FIELDS
        }
        for field_name in self.CARD_SECRET_FIELDS:
            policies[field_name] = FieldPolicy(symbol="*")
        return policies
