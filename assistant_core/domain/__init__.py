"""领域层模型与协议。

包含：
- models: 统一的 Message / CompletionRequest / CompletionOutcome 模型。
- scheduling: 预约请求记录及 DocumentStore、IdentityProvider 协议。
- exceptions: 业务异常类型定义。
"""
