class Remapper():
    """Class used to control the remapping of one dictionary to another dictionary."""

    def __init__(self, new_key=None, remap_function=None, to_unpack=False):
        """Create a Remapper object

        :param new_key: The new key of the item, defaults to None
        :type new_key: str, optional
        :param remap_function: The remapping function, defaults to None
        :type remap_function: function, optional
        :param to_unpack: Unpack the remapped item (to map to multiple output keys),
            defaults to False
        :type to_unpack: bool, optional
        :raises ValueError: if unable to perform a remapping
        """

        if new_key is not None and to_unpack:
            raise ValueError(
                'If to_unpack is True, new_key may not be specified.')

        self.new_key = new_key

        if isinstance(remap_function, staticmethod):
            remap_function = remap_function.__func__

        if remap_function is not None and not callable(remap_function):
            raise ValueError('remap_function must be callable or None.')

        self.remap_function = remap_function
        self.to_unpack = to_unpack

    @staticmethod
    def remap(info, remapping_dict, remap_key, remap_input, keep_unknown_keys=False):
        """A function used to remap items from one dictionary to another

        :param info: Output dictionary
        :type info: dict
        :param remapping_dict: Dictionary of remappings
        :type remapping_dict: dict
        :param remap_key: The key of the remapping
        :type remap_key: str
        :param remap_input: The input sent to the remapping function
        :type remap_input: object
        :param keep_unknown_keys: If no remapping is found, keep the data
            with its original key and value. Defaults to False
        :type keep_unknown_keys: bool, optional
        :raises ValueError: if attempting to unpack an item that is not a dictionary,
            or if an unknown remapping is specified
        """

        remap = remapping_dict.get(remap_key)

        if remap:
            if isinstance(remap, Remapper):
                if remap.remap_function:
                    new_value = remap.remap_function(remap_input)
                else:
                    new_value = remap_input

                if not remap.to_unpack:
                    info[remap.new_key] = new_value
                elif isinstance(new_value, dict):
                    info.update(new_value)
                else:
                    raise ValueError(
                        'Unable to unpack item which is not a dictionary.')

            elif isinstance(remap, str):
                info[remap] = remap_input
            else:
                raise ValueError('Unknown remapping specified.')

        elif keep_unknown_keys:
            info[remap_key] = remap_input

    @staticmethod
    def remap_dict(input_dictionary, remapping_dict, keep_unknown_keys=False):
        """Given an input dictionary and a remapping dictionary, return the remapped dictionary

        :param input_dictionary: Input dictionary
        :type input_dictionary: dict
        :param remapping_dict: Dictionary of Remapper objects
        :type remapping_dict: dict
        :param keep_unknown_keys: If no remapping is found, keep the data
            with its original key and value. Defaults to False
        :type keep_unknown_keys: bool, optional
        :return: Remapped dictionary
        :rtype: dict
        """

        info = {}
        for key in input_dictionary:
            Remapper.remap(
                info, remapping_dict, key, input_dictionary[key],
                keep_unknown_keys=keep_unknown_keys
            )
        return info
