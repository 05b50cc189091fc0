class AppStatusCode:
    # Success
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    OPERATION_SUCCESSFUL = "101"

    # Validation
    INVALID_INPUT = "200"
    REQUIRED_VALIDATION_ERROR = "201"
    DUPLICATE_ADD_ERROR = "202"
    RECORD_NOT_FOUND = "203"

    # Operation
    OPERATION_FAILED = "300"
    OPERATION_ERROR = "301"
    UNAUTHORIZED_ACTION = "302"

    # Authentication
    AUTHENTICATION_TOKEN_INVALID = "400"
    AUTHENTICATION_TOKEN_EXPIRED = "401"
    AUTHENTICATION_USER_INVALID = "402"
    AUTHENTICATION_USER_INACTIVE = "403"
    AUTHENTICATION_CREDENTIALS_INVALID = "404"
    AUTHENTICATION_UNAUTHORIZED_ACCESS = "405"
