"""Conversion between wire activities and persistence records."""

from gracebot.core.exceptions import ValidationError
from gracebot.models import Activity, ActivityType, ChannelAccount, ConversationAccount
from gracebot.storage.models import ActivityModel


class ActivityConverter:
    """Lossless, field-by-field mapping between Activity and ActivityModel.

    ``to_activity(to_model(a))`` reproduces ``a`` on id, text, type,
    service_url, timestamp, channel_id, from, recipient, conversation and
    reply_to_id. Missing id, type or timestamp raise ValidationError instead
    of being defaulted.
    """

    def to_model(self, activity: Activity) -> ActivityModel:
        if not activity.id:
            raise ValidationError("id")
        if activity.type is None:
            raise ValidationError("type")
        if activity.timestamp is None:
            raise ValidationError("timestamp")

        sender = activity.from_
        recipient = activity.recipient
        conversation = activity.conversation

        return ActivityModel(
            id=activity.id,
            type=activity.type.value,
            timestamp=activity.timestamp,
            text=activity.text,
            service_url=activity.service_url,
            channel_id=activity.channel_id,
            reply_to_id=activity.reply_to_id,
            from_id=sender.id if sender else None,
            from_name=sender.name if sender else None,
            recipient_id=recipient.id if recipient else None,
            recipient_name=recipient.name if recipient else None,
            conversation_id=conversation.id if conversation else None,
            conversation_name=conversation.name if conversation else None,
            conversation_is_group=conversation.is_group if conversation else None,
        )

    def to_activity(self, model: ActivityModel) -> Activity:
        if not model.id:
            raise ValidationError("id", source="activity model")
        if not model.type:
            raise ValidationError("type", source="activity model")
        if model.timestamp is None:
            raise ValidationError("timestamp", source="activity model")

        return Activity(
            id=model.id,
            type=ActivityType(model.type),
            timestamp=model.timestamp,
            text=model.text,
            service_url=model.service_url,
            channel_id=model.channel_id,
            reply_to_id=model.reply_to_id,
            from_=self._channel_account(model.from_id, model.from_name),
            recipient=self._channel_account(model.recipient_id, model.recipient_name),
            conversation=self._conversation_account(model),
        )

    @staticmethod
    def _channel_account(account_id: str | None, name: str | None) -> ChannelAccount | None:
        if account_id is None:
            return None
        return ChannelAccount(id=account_id, name=name)

    @staticmethod
    def _conversation_account(model: ActivityModel) -> ConversationAccount | None:
        if model.conversation_id is None:
            return None
        return ConversationAccount(
            id=model.conversation_id,
            name=model.conversation_name,
            is_group=model.conversation_is_group,
        )
