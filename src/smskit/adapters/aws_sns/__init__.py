"""AWS SNS adapter – publish client and delivery-report webhook."""
from smskit.adapters.aws_sns.client import AWS_SNS, AwsSnsClient

__all__ = ["AWS_SNS", "AwsSnsClient"]
